"""
Dashboard: kanban view logic and the HTTP/SSE API.
"""
