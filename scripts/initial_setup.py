"""Create the directory database schema."""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from employee_directory.config import get_settings
from employee_directory.database import run_migrations


def main() -> None:
    run_migrations()
    print("Database initialised at", get_settings().database_url)


if __name__ == "__main__":
    main()
