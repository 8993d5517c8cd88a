"""Client version tracking.

CLIENT_VERSION is reported in the ``User-Agent`` header and by
``shellchat --version``. Bump it with every release.

Bump rules:
- Patch (0.1.x): bug fixes, wording tweaks
- Minor (0.x.0): new commands, new settings, persona changes
- Major (x.0.0): protocol changes (new API version, new endpoints)
"""

CLIENT_VERSION = "0.1.0"
