import sys

from provider_project.cli import main

sys.exit(main())
