"""
MCP Server for marine chemistry seed generation.

This server provides depth-resolved marine chemistry seeds (nutrients,
redox-sensitive species, organic matter, carbonate chemistry) for ocean
locations, driven by a dissolved-oxygen cascade and Longhurst province biomes.
"""

import logging
import os
from mcp.server.fastmcp import FastMCP

# Configure logging
logging.basicConfig(
    level=getattr(logging, os.environ.get("BIOGEOSEED_LOG_LEVEL", "INFO").upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(os.environ.get("BIOGEOSEED_LOG_FILE", "biogeoseed.log")),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger("biogeoseed-mcp")

# Initialize the MCP server
mcp = FastMCP("biogeoseed")

from profiles.seed_tools import generate_environmental_seed, generate_depth_profile

mcp.tool()(generate_environmental_seed)     # Tool 1: Seed at one location and depth
mcp.tool()(generate_depth_profile)          # Tool 2: Solute profiles over a depth sweep

from utils.parameters import DEFAULT_PARAMETER_STORE
from utils.provinces import get_default_provinces_path

if __name__ == "__main__":
    logger.info("Starting BioGeoSeed MCP server...")

    provinces_path = get_default_provinces_path()
    if provinces_path:
        logger.info(f"Province data: {provinces_path}")
    else:
        logger.warning("BIOGEOSEED_PROVINCES_PATH is not set; seed requests will fail until it is configured")
    logger.info(f"Biomes with parameters: {', '.join(DEFAULT_PARAMETER_STORE.biomes())}")

    logger.info("Registered 2 tools:")
    logger.info("  1. generate_environmental_seed: Standardized chemistry seed for a location and depth")
    logger.info("  2. generate_depth_profile: Selected solutes sampled from the surface to a maximum depth")

    mcp.run()
