DEFAULTS = dict(
    simulation=dict(radius=56.0, targetRevolutions=10.0, speedMultiplier=1.0, piMode="3.14"),
    view=dict(frameIntervalMs=16, transparent=False, tooltip=True),
    quiz=dict(radiusMin=20, radiusMax=69, revolutionsMin=3, revolutionsMax=7, tolerance=5),
)

SPEED_CHOICES = [
    (0.5, "0.5x"),
    (1.0, "1x"),
    (2.0, "2x"),
]

PI_MODES = [
    ("3.14", "π ≈ 3.14"),
    ("22/7", "π ≈ 22/7"),
]

TOOLTIPS = {
    "simulation.radius": "Radius of the wheel in centimetres. Changing it restarts the run from the origin.",
    "simulation.targetRevolutions": "Number of full turns after which the wheel stops.",
    "simulation.piMode": "Approximation of π used for every circumference and distance.",
    "simulation.speedMultiplier": "Playback speed. 1x moves the wheel 30 cm per second.",
    "info.circumference": "Distance covered by one revolution: 2 × π × r.",
    "info.distance": "Distance covered so far: circumference × revolutions.",
    "info.currentRevolutions": "Revolutions completed since the last reset.",
    "step.next": "Runs the next step of the guided walkthrough.",
    "quiz.start": "Draws a new wheel and number of revolutions to compute.",
    "quiz.answer": "Distance in centimetres, rounded to the nearest integer.",
}
