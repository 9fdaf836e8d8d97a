# Routes package init
"""
Microblog Backend: API Routes Package
=====================================

Route Inventory:
    - accounts.py:  POST   /register
                    POST   /login
    - messages.py:  POST   /messages
                    GET    /messages
                    GET    /messages/{message_id}
                    DELETE /messages/{message_id}
                    PATCH  /messages/{message_id}
                    GET    /accounts/{account_id}/messages
    - health.py:    GET    /health

Routes stay thin: decode the request, call a service, shape the response.
Error-to-status mapping lives in the global handlers in main.py.
"""
