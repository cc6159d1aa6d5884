import sys

from kubelens.main import main

sys.exit(main())
