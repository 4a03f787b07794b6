# gridrun/op/d4.py
# D4 dihedral group operations on square grids

from __future__ import annotations
import numpy as np

# D4 pose IDs (frozen)
# 0=identity, 1=rot90, 2=rot180, 3=rot270,
# 4=flipH, 5=flipH∘rot90, 6=flipH∘rot180, 7=flipH∘rot270
POSES = (0, 1, 2, 3, 4, 5, 6, 7)

# Inverse map for D4 group
INVERSE_POSE = {
    0: 0,
    1: 3,  # R90 inverse is R270
    2: 2,
    3: 1,
    4: 4,
    5: 5,
    6: 6,
    7: 7,
}


def apply_pose(G: np.ndarray, pose_id: int) -> np.ndarray:
    """
    Apply D4 pose transformation to grid.

    Note: numpy's rot90(k=1) is 90° counterclockwise.
    For 90° clockwise (R90), use rot90(k=3).

    Args:
        G: input grid (n×n)
        pose_id: D4 pose identifier (0-7)

    Returns:
        Transformed grid (a new array)

    Raises:
        ValueError: if pose_id not in {0..7}
    """
    if pose_id not in POSES:
        raise ValueError(f"Invalid pose_id {pose_id}, must be in {POSES}")

    if pose_id == 0:
        out = G
    elif pose_id == 1:
        out = np.rot90(G, k=3)
    elif pose_id == 2:
        out = np.rot90(G, k=2)
    elif pose_id == 3:
        out = np.rot90(G, k=1)
    elif pose_id == 4:
        out = np.fliplr(G)
    elif pose_id == 5:
        out = np.rot90(np.fliplr(G), k=3)
    elif pose_id == 6:
        out = np.rot90(np.fliplr(G), k=2)
    else:
        out = np.rot90(np.fliplr(G), k=1)
    return np.ascontiguousarray(out).copy()


def get_inverse_pose(pose_id: int) -> int:
    """
    Get inverse pose for a given D4 pose.

    Raises:
        ValueError: if pose_id not in {0..7}
    """
    if pose_id not in INVERSE_POSE:
        raise ValueError(f"Invalid pose_id {pose_id}")
    return INVERSE_POSE[pose_id]
