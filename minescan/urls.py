from django.urls import path
from . import views

app_name = 'minescan'

urlpatterns = [
    path('api/image-input', views.image_input_view, name='image-input'),
    path('healthcheck', views.healthcheck_view, name='healthcheck'),
]
