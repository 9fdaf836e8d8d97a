# Services package init
"""
Microblog Backend: Services Layer
=================================

What:  Business logic layer sitting between routes (HTTP) and repositories
       (persistence).
How:   Services receive their repository in the constructor; routes obtain
       per-request service instances through FastAPI dependencies
       (microblog.dependencies), so there is no module-level service state.

Service Inventory:
    - AccountService: registration, login check, account maintenance
    - MessageService: message create / update / delete / reads
"""
