"""
Use Cases

Organized into domain folders:
- auth/: Authentication flows
- users/: User administration
- content/: Public site content
- audit/: Audit trail browsing
- dashboard/: Overview statistics and analytics

Import from subdirectories.
"""
