"""HDF5 format constants used while building and displaying descriptor trees.

The container layer is h5py; these values name the parts of it we rely on:

    /                  — root group, anchor of every traversal
    link types         — hard / soft / external (h5py link classes)
    layouts            — compact / contiguous / chunked / virtual (h5d tags)
    filter pipeline    — ordered stages on chunked datasets (h5z ids)
"""

# Path of the root group inside every file
ROOT_PATH = "/"

# The root has no parent link, so it is described as reached by a hard link
ROOT_LINK_KIND = "Hard"

# Well-known HDF5 filter ids. Anything else falls back to the name stored
# in the file, then to "filter-<id>".
FILTER_NAMES = {
    1: "deflate",
    2: "shuffle",
    3: "fletcher32",
    4: "szip",
    5: "nbit",
    6: "scaleoffset",
    307: "bzip2",
    32000: "lzf",
    32001: "blosc",
    32004: "lz4",
    32008: "bitshuffle",
    32013: "zfp",
    32015: "zstd",
    32017: "sz",
}

# Arrays with more elements than this are summarised when rendered as
# attribute strings
ATTR_ARRAY_THRESHOLD = 16

# Glyphs used for tree labels
GROUP_GLYPH = "\U0001f4c1"
DATASET_GLYPH = "\U0001f4c4"
LINK_GLYPH = "→"
CYCLE_GLYPH = "↻"
