# Routes package init
"""
ReviewShare Backend — API Routes Package
=========================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles one resource and delegates to its service.

Route Inventory:
    - users.py:     GET  /users, POST /users/register|registerconfirm|resendconfirm|login
                    POST /users/save|unsave|saved, GET /users/protected
    - reviews.py:   GET  /reviews, /reviews/page, /reviews/search,
                         /reviews/author/{author}, /reviews/{id}
                    POST /reviews, /reviews/{id}/like, DELETE /reviews/{id}
    - comments.py:  GET  /comments, /comments/review/{reviewId}
                    POST /comments, /comments/{id}/like
    - drafts.py:    POST /drafts, GET /drafts/mine, POST /drafts/{id}/publish
    - health.py:    GET  /health

Routes stay thin: extract the request data, call the service with the
injected store, return the schema. Errors are raised, never formatted here.
"""
