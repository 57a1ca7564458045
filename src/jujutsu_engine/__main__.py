import sys

from jujutsu_engine.cli import main

sys.exit(main())
