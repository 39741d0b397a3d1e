"""
Commands - CLI command implementations for flowdemo.

Each module groups top-level CLI commands:
- script:   Execute the sample Cadence script
- auth:     keygen / login / logout
- transact: send / deploy / ping (require login)
- events:   Query and normalize historical events
"""
