from discord_mcp.server.mcp_server import main

main()
