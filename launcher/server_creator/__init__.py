"""
server_creator package
----------------------
Provisions a Minecraft dedicated server installation: picks a release from the
version manifest, downloads server.jar, probes a tuned and a minimal JVM launch,
accepts the EULA and writes a reusable launch script.
"""

__version__ = "0.1.0"
