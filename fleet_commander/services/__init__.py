# Service layer for Fleet Commander
# - backend:          async interface to the privileged backend (probe, ssh, shutdown, checks)
# - shell_backend:    default backend built on local subprocesses
# - status_monitor:   batched reachability polling and status map reconciliation
# - target_selector:  active tab and derived online state
# - dispatcher:       terminal / shutdown / diagnostics actions
# - confirmation:     shutdown confirmation gate
# - diagnostics:      diagnostic report model and view state
