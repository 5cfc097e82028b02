# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
from fairdice.cli import main

if __name__ == "__main__":
    main()
