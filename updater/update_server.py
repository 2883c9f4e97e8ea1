#!/usr/bin/env python3
"""
Modpack server-pack updater (script entry point)

Resolves the newest CurseForge server pack for MODPACK_ID / MINECRAFT_VERSION,
downloads and unpacks it, and rewrites launch.sh and the Dockerfile.
Requires CURSEFORGE_API_KEY in the environment.
"""

import sys

from serverpack_updater.cli import main

if __name__ == "__main__":
    sys.exit(main())
