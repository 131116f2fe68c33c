from spidra_mcp.mcp_server import main

main()
