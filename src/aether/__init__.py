"""aether - per-user binary package management for Arch-style packages.

Parses package metadata (.PKGINFO, .BUILDINFO), validates package directories,
and installs or removes packages against a per-user package store without
requiring root.
"""
