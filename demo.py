"""
Quick demo — watch the circles bounce.
Run: venv/bin/python demo.py
A/+ add, R/- remove, Space reset, Up/Down speed, [ ] resize, Q quit.
"""
from bouncer.engine import generate_trajectory, CollectionConfig, CircleCollection
from bouncer.metrics import is_contained, compute_speeds
from bouncer.renderer import BouncerApp, AppearanceConfig
import bouncer as P

# Headless sanity run using centralized defaults
config = CollectionConfig(seed=P.SEED)
traj = generate_trajectory(config, n_ticks=1000)
speeds = compute_speeds(traj['states'])

print(f"Circles: {traj['states'].shape[1]}")
print(f"Contained for 1000 ticks: {is_contained(traj)}")
print(f"Speed drift: {abs(speeds[-1] - speeds[0]).max():.10f}")

# Interactive window
app = BouncerApp(CircleCollection(config), AppearanceConfig(fps=P.FPS))
frames = app.run()
print(f"Frames shown: {frames}")
