"""Run the canary-variants command line tool."""

from canary_variants.tool.canary_variants import main

if __name__ == "__main__":
    main()
