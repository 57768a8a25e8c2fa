import sys

from effectcase.cli import main

sys.exit(main())
