"""Allow ``python -m clusterlogin``."""

from clusterlogin.app import main

main()
