#!/usr/bin/env python3
"""
Minecraft dedicated server creator
Picks a release, downloads server.jar, probes the JVM flags, accepts the EULA
and writes a launch script.
"""

import sys
from server_creator.cli import main

if __name__ == "__main__":
    sys.exit(main())
