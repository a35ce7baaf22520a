"""
Planboard services.

- business_calendar: working days under weekend / holiday rules
- assignees: parsing, splitting and display of assignee lists
- graph: task tree queries, cycle validation, rollups
- workload: derived task fields and per-person load series
- filters: ancestor-preserving filtering
- reducer / history: state transitions with bounded undo/redo
- preferences / board: persistence port and the board facade
"""
