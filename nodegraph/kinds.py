# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
# Hemisphere tags used for grouping/colouring nodes
HEMISPHERE_LEFT = "left"
HEMISPHERE_RIGHT = "right"
HEMISPHERE_CENTER = "center"

KNOWN_HEMISPHERES = (HEMISPHERE_LEFT, HEMISPHERE_RIGHT, HEMISPHERE_CENTER)

# Defaults for freshly added nodes
NEW_NODE_ID = "new-node"
NEW_NODE_LABEL = "New Node"
NEW_NODE_X = 50
NEW_NODE_Y = 50

# Stored coordinates are percentages of the canvas
COORD_MIN = 0
COORD_MAX = 100

# Editable fields
SCALAR_FIELDS = ("label", "hemisphere", "x", "y")
CONTENT_FIELDS = ("title", "body", "image", "links")
