import sys

from gofr_dotenv.cli import main

sys.exit(main())
