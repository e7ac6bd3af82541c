"""Budget Studio: budget allocation dashboard engine and API."""
