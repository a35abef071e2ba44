from .jsondesign import (
    NETLIST_SCHEMA,
    design_from_json,
    design_to_json,
    read_json_design,
    write_json_design,
)
