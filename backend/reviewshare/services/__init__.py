# Services package init
"""
ReviewShare Backend — Services Layer
=====================================

What:  Data-access layer sitting between routes (HTTP) and the DynamoDB store.
How:   Services are stateless singletons. Every method takes the injected
       DynamoStore as its first argument, translates a domain operation into
       single-table (or one transactional) DynamoDB calls, and raises the
       application exceptions from reviewshare.exceptions.

Service Inventory:
    - UserService:     users, confirmation codes, login, saved lists
    - ReviewService:   reviews, pagination cursor, search, likes
    - CommentService:  comments per review, likes
    - DraftService:    drafts and the transactional publish
    - ids:             counter-backed id allocation with conditional inserts
    - code_sender:     delivery of registration confirmation codes
"""
