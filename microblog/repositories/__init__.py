# Repositories package init
"""
Microblog Backend: Persistence Layer
====================================

What:  Data access objects, one per entity, over an AsyncSession.
How:   Every statement is built with the SQLAlchemy expression language,
       so values are always sent as bound parameters. Driver errors are
       wrapped in PersistenceError before leaving this package.

Repository Inventory:
    - Repository (abstract): get_by_id / get_all / insert / update / delete
    - AccountRepository: + find_by_username, username_exists
    - MessageRepository: + find_by_posted_by

Lookups return None (or an empty list) when no row matches; that is an
expected outcome, not an error.
"""
