import sys

from mongoschema.cli import main

sys.exit(main())
