import sys

from derived_objects.cli import main

sys.exit(main())
