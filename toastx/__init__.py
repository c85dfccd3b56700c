"""
Toast X — Peer Recognition Engine
==================================
Colleagues grant each other points-based recognitions ("toasts"), earn
badges and awards, and climb leaderboards.  This package holds the rule
engine that gates recognition creation (daily limits, cooldowns, monthly
caps, reciprocal discount), the credit calculator, and the in-memory
aggregate store the rest of the product reads from.

Package layout::

    toastx/
    ├── config.py          # YAML → typed Python config (limits, credit values)
    ├── constants.py       # Company values, awards, rejection copy
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + session helper
    │   └── models.py      # Enums + state_snapshots table
    ├── engine/
    │   ├── timeutil.py    # Id generation + calendar helpers
    │   ├── credits.py     # Credit calculation + monthly clamp
    │   ├── anti_gaming.py # Anti-gaming checks + input validation
    │   └── badges.py      # Declarative badge table
    ├── store/
    │   ├── state.py       # Immutable domain records + ToastState
    │   ├── users.py       # User transitions & selectors
    │   ├── recognitions.py
    │   ├── notifications.py
    │   ├── snapshot.py    # State ⇄ JSON dict (merge-with-defaults)
    │   └── holder.py      # StateStore: lock-guarded snapshot-and-swap
    ├── services/
    │   ├── recognition_service.py  # create_recognition orchestrator
    │   ├── leaderboard_service.py  # Leaderboards + stats
    │   ├── snapshot_service.py     # Snapshot persistence
    │   └── seed.py                 # Demo data seeder
    └── api/
        ├── main.py        # FastAPI app
        ├── deps.py        # JWT → acting user, StateStore wiring
        └── routes/        # Recognition, notification, public endpoints
"""

__version__ = "0.1.0"
