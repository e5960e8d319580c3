# Service layer for the Penpot control panel
# - backend_client:    async HTTP client for the control backend + host side channels
# - status_poller:     periodic /status polling, owns the snapshot
# - action_controller: serialized start/stop/restart
# - log_viewer:        on-demand per-service log fetch
