"""Allow running as: python -m dockship"""

from dockship.main import main

if __name__ == "__main__":
    main()
