import sys

from weathervoice.cli import main

sys.exit(main())
