"""
Use Cases

Organized into domain folders:
- auth/: Registration, login, email confirmation, password flows
- two_factor/: TOTP enrollment and second-step login
- users/: Sessions, roles, account deletion
- assignments/: Coursework guarded by role and ownership

Import from subdirectories.
"""
