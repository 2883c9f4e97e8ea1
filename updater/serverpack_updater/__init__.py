"""
serverpack_updater package
--------------------------
Keeps a dockerized modpack server repository on the newest CurseForge server
pack. Contains modules for settings, logging, the CurseForge catalog client,
release resolution, download/extraction and in-place patching of launch.sh
and the Dockerfile.
"""

__version__ = "0.3.0"
