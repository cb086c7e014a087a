"""VirtualBox Guest Additions setup for Ubuntu guests.

Run inside the VM. Design goals:
- One linear, synchronous pipeline of idempotent steps
- Best-effort native packages first, vendor ISO only when needed
- Every external action reports an explicit outcome
- Centralized logging
"""

__all__ = []
