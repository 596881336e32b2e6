"""Allow ``python -m expenseflow``."""
from expenseflow.main import main

if __name__ == "__main__":
    main()
