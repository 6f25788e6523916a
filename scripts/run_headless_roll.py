"""Roll the wheel without any window and print what the canvas would show."""
import os, sys
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from roda.engine import RodaEngine
from roda.view.scene import build_scene
from roda.wheel_math import format_length

engine = RodaEngine()
engine.set_speed_multiplier(2)
engine.resize_viewport(800, 400)
engine.start()

revolutions = []
t = 0.0
frames = 0
while engine.advance(t):
    revolutions.append(engine.current_revolutions)
    frames += 1
    t += 16.0
    if not engine.state.is_playing:
        break

scene = build_scene(engine)
print('Total frames:', frames)
print('Revolution progression sample (first 10):', [round(r, 4) for r in revolutions[:10]])
print('Final revolutions:', engine.current_revolutions)
print('Distance:', format_length(engine.current_distance()))
print('Pixel scale:', engine.state.pixel_scale, 'marker interval:', engine.state.marker_interval)
print('Camera offset:', scene.offset_x)
print('Tick labels:', [c.text for c in scene.by_role('tick_label')][:8])
print('Revolution markers:', len(scene.by_role('revolution')))
