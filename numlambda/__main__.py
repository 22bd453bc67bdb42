import sys

from numlambda.main import main

sys.exit(main())
