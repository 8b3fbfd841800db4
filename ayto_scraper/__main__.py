import sys

from ayto_scraper.cli import main

sys.exit(main())
