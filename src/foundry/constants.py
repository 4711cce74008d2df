"""Application constants and defaults."""

APP_NAME = "foundry"

# Repository creation defaults
DEFAULT_AUTO_INIT = True
DEFAULT_PRIVATE = False
DEFAULT_BRANCH = "main"

# Productionalization defaults
DEFAULT_PRODUCTIONALIZE = False
DEFAULT_BRANCH_PROTECTION_TARGET = "master"

# API rate limiting
SECRET_CREATION_DELAY_SECONDS = 0.1
