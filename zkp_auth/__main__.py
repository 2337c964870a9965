import sys

from zkp_auth.cli import main

sys.exit(main())
