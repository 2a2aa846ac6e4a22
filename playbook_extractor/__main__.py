import sys

from playbook_extractor.cli import main

sys.exit(main())
