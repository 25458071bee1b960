"""Monster vault: a local catalog of user-authored creature blueprints.

Purpose:
- Persist blueprints under a single storage key.
- Derive display-ready monsters from them on every read.
- Import from vault exports, single-monster files, or the bundled SRD pack.
"""
