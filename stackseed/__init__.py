"""stackseed -- scaffolds Next.js + Express + Prisma + Postgres projects."""

__version__ = "0.1.0"
