from mcp.server.fastmcp import FastMCP

from nutrisnap_core.config import configure_logging, load_settings
from nutrisnap_core.flows import NutriSnap
from mcp_server.tools.nutrisnap_tools import register_nutrisnap_tools


def build_server(snap: NutriSnap) -> FastMCP:
    mcp = FastMCP("nutrisnap")
    register_nutrisnap_tools(mcp, snap)
    return mcp


def main():
    settings = load_settings()
    configure_logging(settings.log_level)
    # Initialize and run the server
    build_server(NutriSnap.from_settings(settings)).run(transport='stdio')


if __name__ == "__main__":
    main()
