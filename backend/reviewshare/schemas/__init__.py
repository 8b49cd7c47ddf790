# Schemas package init
"""
ReviewShare Backend — API Schemas
==================================

What:  Pydantic models defining the API contract between frontend and backend.

Schema Inventory:
    - common.py:   ActionResponse, LikeResponse, ErrorResponse, HealthResponse
    - user.py:     registration, login, saved-list bodies and responses
    - review.py:   ReviewCreate, Review, ReviewPage
    - comment.py:  CommentCreate, Comment
    - draft.py:    DraftCreate, Draft
"""
