"""nexplore Example: Browse a NeXus-style scan file

Writes a small NeXus-like HDF5 file (an NXentry with detector data,
a soft link to it and an external monitor file), loads it with nexplore,
and walks the resulting tree.

Run:
    python examples/browse_nexus.py

Output:
    - Creates scan_0001.h5 and monitor_0001.h5
    - Prints the tree, one dataset in detail, and a name search
"""

import h5py
import numpy as np
from rich.console import Console

from nexplore import find, load
from nexplore.view import to_rich_tree


def write_scan(path: str, monitor_path: str) -> None:
    """Write a NeXus-like scan with chunked, compressed detector frames."""
    with h5py.File(monitor_path, "w") as f:
        f.create_dataset("counts", data=np.random.default_rng(0).poisson(100, 50))

    with h5py.File(path, "w") as f:
        entry = f.create_group("entry")
        entry.attrs["NX_class"] = "NXentry"
        entry.create_dataset("title", data="demo scan", dtype=h5py.string_dtype())

        detector = entry.create_group("instrument/detector")
        detector.attrs["NX_class"] = "NXdetector"
        frames = detector.create_dataset(
            "data",
            data=np.random.default_rng(1).random((50, 64, 64), dtype=np.float32),
            chunks=(1, 64, 64),
            compression="gzip",
            compression_opts=4,
            shuffle=True,
        )
        frames.attrs["units"] = "counts"

        data = entry.create_group("data")
        data.attrs["NX_class"] = "NXdata"
        data.attrs["signal"] = "data"
        data["data"] = h5py.SoftLink("/entry/instrument/detector/data")
        data["monitor"] = h5py.ExternalLink(monitor_path, "/counts")


def main() -> None:
    scan_path = "scan_0001.h5"
    monitor_path = "monitor_0001.h5"

    print("[1/3] Writing scan file...")
    write_scan(scan_path, monitor_path)

    print("[2/3] Loading...")
    info = load(scan_path)
    console = Console()
    console.print(to_rich_tree(f"{info.name} ({info.size} bytes)", info.to_view_nodes()))

    print("[3/3] Inspecting...")
    frames = info.entity([0, 1, 0, 0])
    print(f"  {frames.name}: shape={frames.shape} type={frames.dtype_descr}")
    print(f"  layout: {frames.layout_info.kind}")
    for stage in getattr(frames.layout_info, "filters", ()):
        print(f"    filter: {stage}")

    for index, names, entity in find(info, "^data$"):
        print(f"  {'.'.join(map(str, index)):<10} /{'/'.join(names)}  ({entity.link_kind})")

    print()
    print("=" * 60)
    print("  Done! Try:")
    print(f"    nexplore tree {scan_path}")
    print(f"    nexplore show {scan_path} 0.1.0.0")
    print("=" * 60)


if __name__ == "__main__":
    main()
