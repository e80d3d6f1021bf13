WHITE = (235, 235, 235)
GREY = (140, 140, 150)
CYAN = (80, 210, 230)
AMBER = (255, 190, 40)
RED = (235, 60, 50)
GREEN = (70, 210, 90)

SKY = (12, 12, 18)
GROUND = (86, 70, 52)
WATER = (30, 70, 140)
