"""
Caller-side surface of the console API.

    config   ClientConfig (base URL, timeout, locale)
    session  SessionContext holding the actor snapshot and tokens
    client   ConsoleClient: requests-based, gate enforced before every call
    history  RevisionReader for entity and model history

Importing this package does not configure Django.
"""
