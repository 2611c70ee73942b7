"""Core: configuration, domain records, contracts and the services built on them.

The derived-data modules (`services.dashboard`, `services.calendar`,
`services.campaign_actions`) are pure. `config` reads and writes the user
`.env`, and `Tracker`/`AuthService` drive the HTTP adapters from
`influbuddy.adapters`.
"""
