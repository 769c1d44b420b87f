import numpy as np


def compute_speeds(states):
    """(T, N, 4) → (T, N) per-axis speed |vx|, |vy| summed. Wall reflection keeps it fixed."""
    vel = states[:, :, 2:]
    return np.abs(vel).sum(axis=2)


def containment_margin(states, radii, width, height):
    """
    Smallest signed distance from any circle edge to the nearest wall, per frame.
    Negative means some circle pokes out of the rectangle.
    """
    pos = states[:, :, :2]
    r = np.asarray(radii)[None, :]
    gaps = np.stack([
        pos[:, :, 0] - r,
        width - r - pos[:, :, 0],
        pos[:, :, 1] - r,
        height - r - pos[:, :, 1],
    ], axis=-1)
    if gaps.shape[1] == 0:
        return np.full(gaps.shape[0], np.inf)
    return gaps.min(axis=(1, 2))


def is_contained(trajectory, atol=1e-9):
    margin = containment_margin(trajectory['states'], trajectory['radii'],
                                trajectory['width'], trajectory['height'])
    return bool((margin >= -atol).all())
