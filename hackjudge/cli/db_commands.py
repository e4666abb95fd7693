"""
Database CLI commands
"""
import asyncio

from hackjudge.database import engine, init_db
from hackjudge.orm.base import Base


class DbCommand:
    """Database CLI command handler."""

    def __init__(self, dry_run: bool = False, bind=None):
        self.dry_run = dry_run
        self.bind = bind

    def execute(self, args) -> int:
        """Execute database command."""
        if args.db_action == "init":
            return self._init(args)
        print("Error: Unknown database action")
        return 1

    def _init(self, args) -> int:
        """Create missing tables."""
        print("=== Database Init ===")
        bind = self.bind or engine

        if self.dry_run:
            print(f"[DRY RUN] Would create missing tables on {bind.url.render_as_string(hide_password=True)}:")
            for table in Base.metadata.sorted_tables:
                print(f"  - {table.name}")
            return 0

        asyncio.run(self._create_tables(bind))
        print(f"✓ {len(Base.metadata.sorted_tables)} tables ready")
        return 0

    @staticmethod
    async def _create_tables(bind) -> None:
        try:
            await init_db(bind)
        finally:
            await bind.dispose()
