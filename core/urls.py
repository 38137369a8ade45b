from django.urls import path
from . import views

urlpatterns = [
    path('', views.index, name='index'),

    path('generate-document/', views.generate_document, name='generate-document'),
    path('generate-invoice/', views.generate_invoice, name='generate-invoice'),
    path('preview-document/', views.preview_document, name='preview-document'),
    path('preview-invoice/', views.preview_invoice, name='preview-invoice'),

    path('artifact/<str:artifact_id>/download/', views.artifact_download, name='artifact-download'),
]
