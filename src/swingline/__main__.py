import sys

from swingline.cli import main

sys.exit(main())
