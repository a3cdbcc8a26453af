"""
Appwrite API gateway for the church song catalogue.

Sub-packages:
- auth: account/session endpoints and per-request client scoping
- proxy: song, playlist and playlist-entry endpoints
"""
